"""Filesystem infrastructure module."""
from .directory_lister import FileListing, parse_extensions, readdirs, readfiles
from .file_handle import APPEND, FileHandle, open_file
from .operations import (
    FileSession,
    append,
    changeowner,
    content,
    copy,
    create,
    makedir,
    newfile,
)
from .registry import HandleRegistry
from .tree_lister import DirectoryTreeListing, dirlist

__all__ = [
    'APPEND',
    'DirectoryTreeListing',
    'FileHandle',
    'FileListing',
    'FileSession',
    'HandleRegistry',
    'append',
    'changeowner',
    'content',
    'copy',
    'create',
    'dirlist',
    'makedir',
    'newfile',
    'open_file',
    'parse_extensions',
    'readdirs',
    'readfiles',
]
