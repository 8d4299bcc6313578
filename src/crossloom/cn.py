"""DOI content negotiation.

The DOI resolver returns metadata in many formats when asked with an
``Accept`` header, e.g. BibTeX, RIS or a formatted citation. See
https://citation.crosscite.org/docs.html
"""

from enum import Enum

from .exceptions import ConfigurationError
from .log_config import logger
from .transport import HttpTransport


class CnFormat(Enum):
    """Formats the DOI resolver can negotiate, valued by their media type."""

    RDF_XML = "application/rdf+xml"
    TURTLE = "text/turtle"
    CITEPROC_JSON = "application/vnd.citationstyles.csl+json"
    TEXT = "text/x-bibliography"
    RIS = "application/x-research-info-systems"
    BIBTEX = "application/x-bibtex"
    CROSSREF_XML = "application/vnd.crossref.unixref+xml"
    DATACITE_XML = "application/vnd.datacite.datacite+xml"
    CROSSREF_TDM = "application/vnd.crossref.unixsd+xml"

    def accept_header(
        self, style: str | None = None, locale: str | None = None
    ) -> str:
        """The ``Accept`` header value.

        ``style`` (a CSL style name such as ``apa``) and ``locale`` only apply
        to formatted text citations.
        """
        if self is not CnFormat.TEXT:
            return self.value
        parts = [self.value]
        if style:
            parts.append(f"style={style}")
        if locale:
            parts.append(f"locale={locale}")
        return "; ".join(parts)


class ContentNegotiator:
    """Fetches a DOI's metadata in a negotiated format from the DOI resolver."""

    def __init__(self, transport: HttpTransport, base_url: str):
        if not base_url:
            raise ConfigurationError("Content negotiation needs a resolver URL.")
        self._transport = transport
        self._base_url = base_url.rstrip("/")

    async def fetch(
        self,
        doi: str,
        fmt: CnFormat = CnFormat.BIBTEX,
        *,
        style: str | None = None,
        locale: str | None = None,
    ) -> str:
        """Return the metadata of ``doi`` in format ``fmt``.

        Raises:
            NotFoundError: If the resolver does not know the DOI.
            APIError: If the resolver cannot serve the format.
        """
        doi = doi.strip().removeprefix("https://doi.org/")
        url = f"{self._base_url}/{doi}"
        accept = fmt.accept_header(style=style, locale=locale)
        logger.info(f"Negotiating {accept} for {doi}")
        response = await self._transport.fetch_raw(url, headers={"Accept": accept})
        return response.text
