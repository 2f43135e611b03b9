"""Navigator Cookie Meta information.
   Navigator Cookie stores the whole session inside a signed (and optionally
   encrypted) cookie token.
"""
__title__ = 'navigator_cookie'
__description__ = (
   'Navigator Cookie stores the session payload inside a signed '
   'and encrypted cookie token.'
)
__version__ = '0.1.0'
__copyright__ = 'Copyright (c) 2023 Jesus Lara'
__author__ = 'Jesus Lara'
__author_email__ = 'jesuslarag@gmail.com'
__license__ = 'Apache-2.0'
__url__ = 'https://github.com/phenobarbital/navigator-cookie'
