"""
This file contains various exceptions raised by raml_toolkit.
"""


class RamlToolkitException(Exception):
    """
    Exceptions raised by raml_toolkit.
    """

    def __init__(self, message: str):
        super().__init__(message)
