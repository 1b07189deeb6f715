class ExitCodes:
    SUCCESS = 0
    ERROR = 1
    CONFIG_ERROR = 2
    EVENT_ERROR = 3
