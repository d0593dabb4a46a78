from .workbook_writer import WorkbookWriter, XLSX_CONTENT_TYPE, read_workbook

__all__ = ['WorkbookWriter', 'XLSX_CONTENT_TYPE', 'read_workbook']
