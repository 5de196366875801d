"""
Settings for the License Authority.

Pick one with DJANGO_SETTINGS_MODULE:
- base.py: shared settings and the LICENSE_SIGNER block
- dev.py: local Vault dev server
- test.py: in-memory signer
- prod.py: hardened HTTP settings and optional file logging
"""
