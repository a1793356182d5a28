class CrimeDashboardException(Exception):
    """Base Exception Class"""
    pass
class DataProcessingError(CrimeDashboardException):
    """Error for Processing the Data"""
    pass
class ParseError(DataProcessingError):
    """Error raised when an uploaded file cannot be turned into incidents"""
    pass
class MalformedFileError(ParseError):
    """Error class for when the uploaded content is not decodable as tabular data"""
    pass
class EmptyDatasetError(ParseError):
    """Error class for when no row survives coordinate validation"""
    pass
class UploadInProgressError(CrimeDashboardException):
    """Error raised when an upload is started while another one is still loading"""
    pass
class ConfigError(CrimeDashboardException):
    """Config Error"""
    pass
