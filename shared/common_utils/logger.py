from os import environ
from datetime import datetime
from zoneinfo import ZoneInfo
from logging import Formatter, StreamHandler, Logger, NOTSET
from colorlog import ColoredFormatter


class SingletonMeta(type):
    _instance = {}

    def __call__(cls, *args, **kwargs):
        if cls not in cls._instance:
            instance = super().__call__(*args, **kwargs)
            cls._instance[cls] = instance
        return cls._instance[cls]


class HotconfLogger(Logger, metaclass=SingletonMeta):
    _initialized = False

    def __init__(self):
        if HotconfLogger._initialized:
            return

        super().__init__(name="HotconfLogger", level=environ.get("LOG_LEVEL", NOTSET))
        self.timezone = ZoneInfo(environ.get("LOG_TIMEZONE", "UTC"))

        Formatter.converter = self.local_time
        local_formatter = ColoredFormatter(
            "%(log_color)s%(asctime)s | %(levelname)s | %(threadName)s | %(msg)s",
            datefmt="%d-%m-%Y, %H:%M:%S",
            log_colors={
                "DEBUG": "blue",
                "INFO": "",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "bold_red",
            },
        )

        console_handler = StreamHandler()
        console_handler.setFormatter(local_formatter)
        self.addHandler(console_handler)

        HotconfLogger._initialized = True

    def local_time(self, *args):
        return datetime.now(tz=self.timezone).timetuple()


logger = HotconfLogger()
