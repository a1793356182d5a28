
import logging
import os
from datetime import datetime

DEFAULT_LOG_DIR = 'logs'

def setup_logger(name, log_dir=None):
    """
    Basic Custom Logging formatting and handling

    Parameters
    name (str) : Name of the logger 
    log_dir (str) : Folder for the log files. Defaults to CRIME_DASHBOARD_LOG_DIR or logs/

    Returns:
    logging.Logger : Configured Logger Instance
    """

    log_dir = log_dir or os.getenv('CRIME_DASHBOARD_LOG_DIR', DEFAULT_LOG_DIR)
    os.makedirs(log_dir, exist_ok=True)

    # Create Logger
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)

    # Streamlit re-executes the script on every interaction
    if logger.handlers:
        return logger

    # Configs for how logs will appear in logs/
    file_format = logging.Formatter(
        '%(levelname)s : %(name)s : %(funcName)s : %(lineno)d : %(message)s'
    )

    log_file = os.path.join(log_dir, f'crime_dashboard_{datetime.now().strftime("%m%d%Y")}.log')
    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(file_format)

    # Console logs configs
    console_format = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s'
    )
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(console_format)


    # Add the config to the Logger obj
    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger
