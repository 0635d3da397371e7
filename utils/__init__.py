# Utils package initialization
from .database import DatabaseManager
from .data_processor import DataProcessor
from .errors import RecordNotFound
from .sample_data import generate_sample_data

__all__ = ['DatabaseManager', 'DataProcessor', 'RecordNotFound', 'generate_sample_data']
