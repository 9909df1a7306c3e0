# Automatically load all models so metadata knows them
from app.models.capital_model import Capital, CapitalMovement
from app.models.client_model import Client
from app.models.loan_model import Loan
from app.models.installment_model import Installment
from app.models.payment_model import Payment
