# run_server.py
import sys
import traceback
import faulthandler
from pathlib import Path

# write crash logs next to the exe
BASE_DIR = Path(sys.executable).resolve().parent if getattr(sys, "frozen", False) else Path(__file__).resolve().parent
LOG_FILE = BASE_DIR / "backend_crash.log"


def main():
    # dump fatal crashes too
    crash_log = open(LOG_FILE, "a", encoding="utf-8")
    faulthandler.enable(crash_log)

    try:
        import uvicorn

        # import app after logging is ready
        from app.core.config import PORT
        from main import app

        uvicorn.run(app, host="0.0.0.0", port=PORT, reload=False, log_level="info")

    except Exception:
        err = traceback.format_exc()
        crash_log.write(err + "\n")
        crash_log.flush()
        print(err)
        sys.exit(1)


if __name__ == "__main__":
    main()
