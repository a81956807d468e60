from micex_iss.logger.logger import DailyRotatingFileHandler, Logger

__all__ = ['DailyRotatingFileHandler', 'Logger']
