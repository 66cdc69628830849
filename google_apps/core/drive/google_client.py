"""
Google Drive API Client
Provides methods to interact with Google Drive API v3
"""
import io
import os
from typing import IO, Any, Dict, List, Optional, Union

from googleapiclient.discovery import build
from googleapiclient.http import MediaFileUpload, MediaIoBaseDownload, MediaIoBaseUpload

from ...utils.logger import setup_logger
from ..base import BaseGoogleAPIClient

logger = setup_logger(__name__)

# Constants
DEFAULT_PAGE_SIZE = 100
DEFAULT_FIELDS = "nextPageToken, files(id, name, mimeType, modifiedTime, size, webViewLink, parents, trashed)"
FOLDER_MIME_TYPE = 'application/vnd.google-apps.folder'

DRIVE_SCOPES = [
    'https://www.googleapis.com/auth/drive',
    'https://www.googleapis.com/auth/drive.file',
    'https://www.googleapis.com/auth/drive.readonly',
]


class GoogleDriveClient(BaseGoogleAPIClient):
    """
    Google Drive API client

    Provides methods to interact with Google Drive:
    - List and get files
    - Create folders, upload, download and export files
    - Rename, move and delete files
    - Manage permissions
    """

    def _build_service(self) -> Any:
        """Build Google Drive API service"""
        return build('drive', 'v3', http=self.http, cache_discovery=False)

    def _get_required_scopes(self) -> List[str]:
        """Get required Google Drive scopes"""
        return DRIVE_SCOPES

    def _get_service_name(self) -> str:
        """Get service name"""
        return "Google Drive"

    # =========================================================================
    # File Listing
    # =========================================================================

    def list_files(
        self,
        query: Optional[str] = None,
        fields: str = DEFAULT_FIELDS,
        page_size: int = DEFAULT_PAGE_SIZE,
        order_by: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        List files from Google Drive, following every page

        Args:
            query: Query string (Drive search syntax), e.g. "trashed = false"
            fields: Fields to include in each response page
            page_size: Number of files to request per page
            order_by: Sort order (e.g., 'modifiedTime desc', 'name')

        Returns:
            List of file resources
        """
        params: Dict[str, Any] = {
            'pageSize': page_size,
            'fields': fields,
            'supportsAllDrives': True,
            'includeItemsFromAllDrives': True,
        }
        if query:
            params['q'] = query
        if order_by:
            params['orderBy'] = order_by

        return self._list_all(self.service.files().list, 'files', **params)

    def get_file(self, file_id: str, fields: str = "*") -> Dict[str, Any]:
        """Get file metadata"""
        return self.service.files().get(
            fileId=file_id,
            fields=fields,
            supportsAllDrives=True
        ).execute()

    # =========================================================================
    # File Creation
    # =========================================================================

    def create_folder(self, title: str, parent_id: Optional[str] = None) -> Dict[str, Any]:
        """Create a folder, optionally inside `parent_id`"""
        body: Dict[str, Any] = {'name': title, 'mimeType': FOLDER_MIME_TYPE}
        if parent_id:
            body['parents'] = [parent_id]

        folder = self.service.files().create(
            body=body,
            fields='id, name, mimeType, parents',
            supportsAllDrives=True
        ).execute()
        logger.info("Created folder", file_id=folder.get('id'))
        return folder

    def upload_file(
        self,
        content: Union[str, os.PathLike, IO[bytes]],
        title: str,
        mime_type: str,
        parent_id: Optional[str] = None,
        description: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Upload a file

        Args:
            content: Local path, or a binary file object
            title: Name of the file in Drive
            mime_type: MIME type of the uploaded content
            parent_id: Folder to upload into
            description: Optional file description

        Returns:
            Created file resource
        """
        if isinstance(content, (str, os.PathLike)):
            media = MediaFileUpload(os.fspath(content), mimetype=mime_type, resumable=True)
        else:
            media = MediaIoBaseUpload(content, mimetype=mime_type, resumable=True)

        body: Dict[str, Any] = {'name': title, 'mimeType': mime_type}
        if parent_id:
            body['parents'] = [parent_id]
        if description:
            body['description'] = description

        uploaded = self.service.files().create(
            body=body,
            media_body=media,
            fields='id, name, mimeType, parents, webViewLink',
            supportsAllDrives=True
        ).execute()
        logger.info("Uploaded file", file_id=uploaded.get('id'), mime_type=mime_type)
        return uploaded

    # =========================================================================
    # File Content
    # =========================================================================

    def download_file(self, file_id: str) -> bytes:
        """Download binary content of a stored file (PDF, image, etc.)"""
        request = self.service.files().get_media(fileId=file_id, supportsAllDrives=True)

        fh = io.BytesIO()
        downloader = MediaIoBaseDownload(fh, request)

        done = False
        while not done:
            status, done = downloader.next_chunk()
            if status:
                logger.debug(f"[GoogleDriveClient] Download progress: {int(status.progress() * 100)}%")

        return fh.getvalue()

    def export_file(self, file_id: str, mime_type: str = 'text/plain') -> bytes:
        """Export a Google Doc/Sheet/Slide to a specific MIME type"""
        return self.service.files().export_media(
            fileId=file_id,
            mimeType=mime_type
        ).execute()

    # =========================================================================
    # File Updates
    # =========================================================================

    def update_file(
        self,
        file_id: str,
        title: Optional[str] = None,
        add_parents: Optional[List[str]] = None,
        remove_parents: Optional[List[str]] = None
    ) -> Dict[str, Any]:
        """Rename a file and/or change its parent folders"""
        body: Dict[str, Any] = {}
        if title:
            body['name'] = title

        params: Dict[str, Any] = {
            'fileId': file_id,
            'body': body,
            'fields': 'id, name, parents',
            'supportsAllDrives': True,
        }
        if add_parents:
            params['addParents'] = ','.join(add_parents)
        if remove_parents:
            params['removeParents'] = ','.join(remove_parents)

        return self.service.files().update(**params).execute()

    def move_file(self, file_id: str, folder_id: str) -> Dict[str, Any]:
        """Move a file out of all its current folders and into `folder_id`"""
        current = self.get_file(file_id, fields='parents')
        return self.update_file(
            file_id,
            add_parents=[folder_id],
            remove_parents=current.get('parents') or None
        )

    def delete_file(self, file_id: str) -> None:
        """Permanently delete a file (bypasses the trash)"""
        self.service.files().delete(fileId=file_id, supportsAllDrives=True).execute()
        logger.info("Deleted file", file_id=file_id)

    # =========================================================================
    # Permissions
    # =========================================================================

    def list_permissions(self, file_id: str) -> List[Dict[str, Any]]:
        """List every permission on a file"""
        return self._list_all(
            self.service.permissions().list,
            'permissions',
            fileId=file_id,
            fields='nextPageToken, permissions(id, type, role, emailAddress)',
            supportsAllDrives=True
        )

    def add_permission(
        self,
        file_id: str,
        role: str,
        permission_type: str = 'user',
        email: Optional[str] = None,
        send_notification: bool = False
    ) -> Dict[str, Any]:
        """
        Grant access to a file

        Args:
            file_id: File ID
            role: 'reader', 'commenter', 'writer', 'organizer' or 'owner'
            permission_type: 'user', 'group', 'domain' or 'anyone'
            email: Address for user/group permissions
            send_notification: Email the grantee
        """
        body: Dict[str, Any] = {'role': role, 'type': permission_type}
        if email:
            body['emailAddress'] = email

        return self.service.permissions().create(
            fileId=file_id,
            body=body,
            sendNotificationEmail=send_notification,
            supportsAllDrives=True
        ).execute()

    def remove_permission(self, file_id: str, permission_id: str) -> None:
        """Revoke a permission"""
        self.service.permissions().delete(
            fileId=file_id,
            permissionId=permission_id,
            supportsAllDrives=True
        ).execute()
