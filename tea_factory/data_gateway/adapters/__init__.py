from .source_batch import BatchSourceAdapter
from .sink_file import CsvFileSink, ConsoleSink, CSV_HEADER, format_csv_row, format_log_line

__all__ = [
    'BatchSourceAdapter',
    'CsvFileSink',
    'ConsoleSink',
    'CSV_HEADER',
    'format_csv_row',
    'format_log_line',
]
