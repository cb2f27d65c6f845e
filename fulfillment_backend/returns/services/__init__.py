"""
PATH: returns/services/__init__.py

Returns workflow services.

Import from the concrete modules (authorization_service, authorization_lifecycle,
expedited_exchange, ...). Models import number_generator from here, so this
package must stay free of model imports.
"""
