"""FreshBooks API access for freshtime."""

from .client import HttpClient, TokenProvider, extract_page
from .auth import ConfigTokenProvider, OAuthApp, client_for_config
from .models import TimeEntry, NewTimeEntry, ClientRecord, Identity, Invoice, RecordList
from . import resources

__all__ = [
    'HttpClient', 'TokenProvider', 'extract_page',
    'ConfigTokenProvider', 'OAuthApp', 'client_for_config',
    'TimeEntry', 'NewTimeEntry', 'ClientRecord', 'Identity', 'Invoice', 'RecordList',
    'resources',
]
