"""
All the routines to talk to the catalog API.

This library is supposed to be mocked when the mocked catalog is needed,
and only the high-level logic has to be tested, not the API calls themselves.

Beware: this is NOT a generic catalog client. It is a set of dedicated adapters
specially tailored to read & patch the locations, not the generic object
manipulation.
"""
