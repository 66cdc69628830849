"""
Google Sheets Core Module

Spreadsheet access (the successor of the GData spreadsheet feeds).
"""
from .google_client import GoogleSheetsClient, SHEETS_SCOPES

__all__ = ['GoogleSheetsClient', 'SHEETS_SCOPES']
