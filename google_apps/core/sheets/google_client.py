"""
Google Sheets API Client
Spreadsheet and worksheet operations over Sheets API v4
"""
from typing import Any, Dict, List, Optional

from googleapiclient.discovery import build

from ...utils.logger import setup_logger
from ..base import BaseGoogleAPIClient

logger = setup_logger(__name__)

SHEETS_SCOPES = [
    'https://www.googleapis.com/auth/spreadsheets',
    'https://www.googleapis.com/auth/spreadsheets.readonly',
    'https://www.googleapis.com/auth/drive',
]

# USER_ENTERED parses input the way the Sheets UI would (numbers, dates, formulas)
DEFAULT_VALUE_INPUT_OPTION = 'USER_ENTERED'


class GoogleSheetsClient(BaseGoogleAPIClient):
    """
    Google Sheets API client

    Provides methods to interact with spreadsheets:
    - Create and get spreadsheets
    - List, find, add and delete worksheets
    - Read, update, append and clear cell values
    """

    def _build_service(self) -> Any:
        """Build Google Sheets API service"""
        return build('sheets', 'v4', http=self.http, cache_discovery=False)

    def _get_required_scopes(self) -> List[str]:
        """Get required Google Sheets scopes"""
        return SHEETS_SCOPES

    def _get_service_name(self) -> str:
        """Get service name"""
        return "Google Sheets"

    # =========================================================================
    # Spreadsheets
    # =========================================================================

    def create_spreadsheet(
        self,
        title: str,
        sheet_titles: Optional[List[str]] = None
    ) -> Dict[str, Any]:
        """Create a spreadsheet, optionally with named worksheets"""
        body: Dict[str, Any] = {'properties': {'title': title}}
        if sheet_titles:
            body['sheets'] = [{'properties': {'title': name}} for name in sheet_titles]

        spreadsheet = self.service.spreadsheets().create(body=body).execute()
        logger.info("Created spreadsheet", spreadsheet_id=spreadsheet.get('spreadsheetId'))
        return spreadsheet

    def get_spreadsheet(self, spreadsheet_id: str) -> Dict[str, Any]:
        """Get spreadsheet metadata (no cell data)"""
        return self.service.spreadsheets().get(spreadsheetId=spreadsheet_id).execute()

    # =========================================================================
    # Worksheets
    # =========================================================================

    def list_worksheets(self, spreadsheet_id: str) -> List[Dict[str, Any]]:
        """
        List the worksheets of a spreadsheet

        Returns:
            [{'sheet_id': int, 'title': str, 'index': int}, ...]
        """
        spreadsheet = self.service.spreadsheets().get(
            spreadsheetId=spreadsheet_id,
            fields='sheets.properties'
        ).execute()

        worksheets = []
        for sheet in spreadsheet.get('sheets', []):
            properties = sheet.get('properties', {})
            worksheets.append({
                'sheet_id': properties.get('sheetId'),
                'title': properties.get('title'),
                'index': properties.get('index'),
            })
        return worksheets

    def find_worksheet_by_title(self, spreadsheet_id: str, title: str) -> Optional[Dict[str, Any]]:
        """Find a worksheet by its title, or None"""
        for worksheet in self.list_worksheets(spreadsheet_id):
            if worksheet['title'] == title:
                return worksheet
        return None

    def add_worksheet(
        self,
        spreadsheet_id: str,
        title: str,
        rows: int = 1000,
        cols: int = 26
    ) -> Dict[str, Any]:
        """Add a worksheet and return its properties"""
        response = self._batch_update(spreadsheet_id, [{
            'addSheet': {
                'properties': {
                    'title': title,
                    'gridProperties': {'rowCount': rows, 'columnCount': cols},
                }
            }
        }])
        return response['replies'][0]['addSheet']['properties']

    def delete_worksheet(self, spreadsheet_id: str, sheet_id: int) -> None:
        """Delete a worksheet by its numeric sheet id"""
        self._batch_update(spreadsheet_id, [{'deleteSheet': {'sheetId': sheet_id}}])

    def _batch_update(self, spreadsheet_id: str, requests: List[Dict[str, Any]]) -> Dict[str, Any]:
        return self.service.spreadsheets().batchUpdate(
            spreadsheetId=spreadsheet_id,
            body={'requests': requests}
        ).execute()

    # =========================================================================
    # Values
    # =========================================================================

    def read_values(self, spreadsheet_id: str, range_name: str) -> List[List[Any]]:
        """Read a range in A1 notation (e.g. 'Sheet1!A1:C10'); empty ranges give []"""
        response = self.service.spreadsheets().values().get(
            spreadsheetId=spreadsheet_id,
            range=range_name
        ).execute()
        return response.get('values', [])

    def update_values(
        self,
        spreadsheet_id: str,
        range_name: str,
        rows: List[List[Any]],
        value_input_option: str = DEFAULT_VALUE_INPUT_OPTION
    ) -> Dict[str, Any]:
        """Overwrite the cells of a range with `rows`"""
        return self.service.spreadsheets().values().update(
            spreadsheetId=spreadsheet_id,
            range=range_name,
            valueInputOption=value_input_option,
            body={'values': rows}
        ).execute()

    def append_rows(
        self,
        spreadsheet_id: str,
        range_name: str,
        rows: List[List[Any]],
        value_input_option: str = DEFAULT_VALUE_INPUT_OPTION
    ) -> Dict[str, Any]:
        """Append rows after the last row of the table found in `range_name`"""
        return self.service.spreadsheets().values().append(
            spreadsheetId=spreadsheet_id,
            range=range_name,
            valueInputOption=value_input_option,
            insertDataOption='INSERT_ROWS',
            body={'values': rows}
        ).execute()

    def clear_values(self, spreadsheet_id: str, range_name: str) -> Dict[str, Any]:
        """Clear values (not formatting) in a range"""
        return self.service.spreadsheets().values().clear(
            spreadsheetId=spreadsheet_id,
            range=range_name,
            body={}
        ).execute()
