#
#
#

from octodns.provider import ProviderException


class EfficientIPClientException(ProviderException):
    pass


class EfficientIPClientNotFound(EfficientIPClientException):
    def __init__(self, path=None):
        message = 'Not Found' if path is None else f'Not Found: {path}'
        super().__init__(message)


class EfficientIPClientUnauthorized(EfficientIPClientException):
    def __init__(self):
        super().__init__('Unauthorized, check username and password')


class EfficientIPRequestFailed(EfficientIPClientException):
    '''SOLIDserver answered but reported `success: false`.'''

    def __init__(self, path, message, status=None):
        super().__init__(f'{path}: {message}')
        self.path = path
        self.status = status
