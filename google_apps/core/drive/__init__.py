"""
Google Drive Core Module

Low-level client for Google Drive API operations.
"""
from .google_client import GoogleDriveClient, DRIVE_SCOPES

__all__ = ['GoogleDriveClient', 'DRIVE_SCOPES']
