import requests


class FakeResponse:
    """Stand-in for ``requests.Response`` in geocoder tests."""

    def __init__(self, payload=None, status_code=200):
        self.payload = payload if payload is not None else {}
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f'{self.status_code} error')

    def json(self):
        return self.payload


def feature_collection(lat, lng, formatted='Rua Exemplo, Porto Alegre'):
    return {'features': [{'geometry': {'coordinates': [lng, lat]}, 'properties': {'formatted': formatted}}]}
