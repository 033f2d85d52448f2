import os

NULL_TEXT = os.environ.get('LAZYSTR_NULL_TEXT', 'None')
DEFAULT_ENCODING = os.environ.get('LAZYSTR_ENCODING', 'utf-8')
