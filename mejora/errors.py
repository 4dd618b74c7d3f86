"""Error taxonomy for the improvement API.

Every error carries the HTTP status it maps to and the user-facing message
returned in the ``error`` field of the response body.
"""

from __future__ import annotations


class MejoraError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500
    default_message = "Error interno al procesar la solicitud."

    def __init__(self, message: str | None = None, *, details: str | None = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class InvalidMethod(MejoraError):
    status_code = 405
    default_message = "Método no permitido."


class MissingCredential(MejoraError):
    status_code = 500
    default_message = "Missing API key"


class PayloadValidationError(MejoraError):
    status_code = 400
    default_message = "Solicitud inválida."


class UpstreamFailure(MejoraError):
    """The generation API answered, but not with something we can use."""

    status_code = 502
    default_message = "El servicio de generación no respondió correctamente."


class EmptyUpstreamResult(UpstreamFailure):
    """A plain-text call came back blank."""


class EmptyImprovement(EmptyUpstreamResult):
    default_message = "No se pudo mejorar el texto."


class EmptyTranslation(EmptyUpstreamResult):
    default_message = "No se pudo traducir el texto."


class MalformedUpstreamJSON(UpstreamFailure):
    default_message = "No se pudo generar la salida estructurada para tonos."


class NoUsableResults(UpstreamFailure):
    default_message = "No se pudieron generar resultados para los tonos solicitados."


class UnclassifiedInternalError(MejoraError):
    status_code = 500
