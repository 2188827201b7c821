"""Registry application for the patient map backend.

Holds the street catalog, geocoded addresses, patients and the operator
accounts, together with the JSON API that serves them.
"""
