import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    AVCHECK_LOG_DIR: str = os.getenv("AVCHECK_LOG_DIR", ".")
    AVCHECK_TEST_DIR: str = os.getenv("AVCHECK_TEST_DIR", "av_test_files")
    AVCHECK_OBSERVE_DELAY_S: float = float(os.getenv("AVCHECK_OBSERVE_DELAY_S", "2"))
    AVCHECK_QUARANTINE_DELAY_S: float = float(
        os.getenv("AVCHECK_QUARANTINE_DELAY_S", "3")
    )
    AVCHECK_HTTP_TIMEOUT_S: float = float(os.getenv("AVCHECK_HTTP_TIMEOUT_S", "5"))
    AVCHECK_PROBES_PATH: str = os.getenv("AVCHECK_PROBES_PATH", "probes.yml")
    AVCHECK_LOG_LEVEL: str = os.getenv("AVCHECK_LOG_LEVEL", "WARNING").upper()


settings = Settings()
