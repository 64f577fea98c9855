"""Navigator VaultLock Meta information.
   Navigator VaultLock decides when unlocked vaults must be locked or logged out.
"""
__title__ = 'navigator_vaultlock'
__description__ = (
   'Navigator VaultLock decides when unlocked credential vaults '
   'must be locked or logged out, and purges in-memory secrets.'
)
__version__ = '0.1.0'
__copyright__ = 'Copyright (c) 2023 Jesus Lara'
__author__ = 'Jesus Lara'
__author_email__ = 'jesuslarag@gmail.com'
__license__ = 'Apache-2.0'
__url__ = 'https://github.com/phenobarbital/navigator-vaultlock'
