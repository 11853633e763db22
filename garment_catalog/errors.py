"""Error taxonomy shared by the catalog services.

Every error carries a stable ``code`` and a user-facing message written in the
catalog language, so callers can surface it as-is.
"""

from __future__ import annotations


class CatalogError(RuntimeError):
    """Base class for failures that end a single user action."""

    code = "catalog_error"
    default_message = "Ocorreu um erro inesperado."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class EmptyResponse(CatalogError):
    """Raised when the model returns no usable content."""

    code = "empty_response"
    default_message = "A IA não retornou nenhuma resposta."


class MalformedResult(CatalogError):
    """Raised when content is present but cannot be decoded."""

    code = "malformed_result"
    default_message = "Não foi possível interpretar a resposta da IA."


class NoJsonFound(CatalogError):
    """Raised when a free-text pricing response contains no JSON object."""

    code = "no_json_found"
    default_message = "Não foi possível extrair JSON da resposta."


class NoPrediction(CatalogError):
    """Raised when the try-on model returns zero predictions."""

    code = "no_prediction"
    default_message = "A API não retornou nenhuma imagem."


class InvalidImageData(CatalogError):
    """Raised when a try-on prediction has no decodable image bytes."""

    code = "invalid_image_data"
    default_message = "A API não retornou dados de imagem válidos."


class ConfigurationError(CatalogError):
    """Raised when credentials for an external call are missing."""

    code = "configuration_error"
    default_message = "Configuração ausente para o serviço externo."


class InvalidInput(CatalogError):
    """Raised for caller contract violations (non-image file, empty field)."""

    code = "invalid_input"
    default_message = "Por favor, selecione um arquivo de imagem."


class EntryNotFound(CatalogError):
    """Raised when an action references an unknown history entry."""

    code = "not_found"
    default_message = "Item não encontrado no histórico."


class ActionInProgress(CatalogError):
    """Raised when an action is triggered while the previous one is running."""

    code = "action_in_progress"
    default_message = "Já existe uma operação deste tipo em andamento."


class ProviderRequestError(CatalogError):
    """Raised when a model provider responds with an error or times out."""

    code = "provider_error"
    default_message = "O serviço de IA está indisponível no momento."

    def __init__(
        self,
        message: str | None = None,
        *,
        provider: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.provider = provider
        self.status_code = status_code
        super().__init__(message)


__all__ = [
    "ActionInProgress",
    "CatalogError",
    "ConfigurationError",
    "EmptyResponse",
    "EntryNotFound",
    "InvalidImageData",
    "InvalidInput",
    "MalformedResult",
    "NoJsonFound",
    "NoPrediction",
    "ProviderRequestError",
]
