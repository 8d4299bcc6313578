"""Closed vocabularies of the Crossref REST API.

Every enumeration member maps to exactly one value on the wire. Filter keys,
sort fields, facets and work type ids are kept here so that the query model
never has to deal with free-form strings for them.
"""

from enum import Enum


class ResourceKind(Enum):
    """The top level resources exposed by the API."""

    WORKS = "works"
    MEMBERS = "members"
    FUNDERS = "funders"
    PREFIXES = "prefixes"
    TYPES = "types"
    JOURNALS = "journals"

    @property
    def path(self) -> str:
        """The plural path segment, e.g. ``/works``."""
        return f"/{self.value}"


class Sort(Enum):
    SCORE = "score"
    RELEVANCE = "relevance"
    UPDATED = "updated"
    DEPOSITED = "deposited"
    INDEXED = "indexed"
    PUBLISHED = "published"
    PUBLISHED_PRINT = "published-print"
    PUBLISHED_ONLINE = "published-online"
    ISSUED = "issued"
    CREATED = "created"
    IS_REFERENCED_BY_COUNT = "is-referenced-by-count"
    REFERENCES_COUNT = "references-count"


class Order(Enum):
    ASC = "asc"
    DESC = "desc"


class Visibility(Enum):
    """Reference distribution levels used by ``reference-visibility`` filters."""

    OPEN = "open"
    LIMITED = "limited"
    CLOSED = "closed"


class QueryField(Enum):
    """Fields accepted as ``query.<field>`` parameters on works."""

    TITLE = "title"
    CONTAINER_TITLE = "container-title"
    AUTHOR = "author"
    EDITOR = "editor"
    CHAIR = "chair"
    TRANSLATOR = "translator"
    CONTRIBUTOR = "contributor"
    BIBLIOGRAPHIC = "bibliographic"
    AFFILIATION = "affiliation"
    PUBLISHER_NAME = "publisher-name"
    FUNDER_NAME = "funder-name"


class Facet(Enum):
    """Works facets. Some facets cap their count at 100 on the server."""

    AFFILIATION = "affiliation"
    FUNDER_NAME = "funder-name"
    FUNDER_DOI = "funder-doi"
    ORCID = "orcid"
    CONTAINER_TITLE = "container-title"
    ASSERTION = "assertion"
    ARCHIVE = "archive"
    UPDATE_TYPE = "update-type"
    ISSN = "issn"
    PUBLISHED = "published"
    TYPE_NAME = "type-name"
    LICENSE = "license"
    CATEGORY_NAME = "category-name"
    RELATION_TYPE = "relation-type"
    ASSERTION_GROUP = "assertion-group"
    PUBLISHER_NAME = "publisher-name"

    @property
    def max_count(self) -> int | None:
        """Largest count the server accepts, ``None`` when unbounded."""
        if self in _CAPPED_FACETS:
            return 100
        return None


_CAPPED_FACETS = frozenset({Facet.ORCID, Facet.CONTAINER_TITLE, Facet.ISSN})


class WorkType(Enum):
    """Work type ids as listed by the ``/types`` resource."""

    BOOK_SECTION = "book-section"
    MONOGRAPH = "monograph"
    REPORT = "report"
    PEER_REVIEW = "peer-review"
    BOOK_TRACK = "book-track"
    JOURNAL_ARTICLE = "journal-article"
    BOOK_PART = "book-part"
    OTHER = "other"
    BOOK = "book"
    JOURNAL_VOLUME = "journal-volume"
    BOOK_SET = "book-set"
    REFERENCE_ENTRY = "reference-entry"
    PROCEEDINGS_ARTICLE = "proceedings-article"
    JOURNAL = "journal"
    COMPONENT = "component"
    BOOK_CHAPTER = "book-chapter"
    PROCEEDINGS_SERIES = "proceedings-series"
    REPORT_SERIES = "report-series"
    PROCEEDINGS = "proceedings"
    STANDARD = "standard"
    REFERENCE_BOOK = "reference-book"
    POSTED_CONTENT = "posted-content"
    JOURNAL_ISSUE = "journal-issue"
    DISSERTATION = "dissertation"
    DATASET = "dataset"
    BOOK_SERIES = "book-series"
    EDITED_BOOK = "edited-book"
    STANDARD_SERIES = "standard-series"

    @property
    def label(self) -> str:
        """Display label, e.g. ``Journal Article``."""
        return self.value.replace("-", " ").title()


class WorksFilterKey(Enum):
    HAS_FUNDER = "has-funder"
    FUNDER = "funder"
    PREFIX = "prefix"
    MEMBER = "member"
    FROM_INDEX_DATE = "from-index-date"
    UNTIL_INDEX_DATE = "until-index-date"
    FROM_DEPOSIT_DATE = "from-deposit-date"
    UNTIL_DEPOSIT_DATE = "until-deposit-date"
    FROM_UPDATE_DATE = "from-update-date"
    UNTIL_UPDATE_DATE = "until-update-date"
    FROM_CREATED_DATE = "from-created-date"
    UNTIL_CREATED_DATE = "until-created-date"
    FROM_PUB_DATE = "from-pub-date"
    UNTIL_PUB_DATE = "until-pub-date"
    FROM_ONLINE_PUB_DATE = "from-online-pub-date"
    UNTIL_ONLINE_PUB_DATE = "until-online-pub-date"
    FROM_PRINT_PUB_DATE = "from-print-pub-date"
    UNTIL_PRINT_PUB_DATE = "until-print-pub-date"
    FROM_POSTED_DATE = "from-posted-date"
    UNTIL_POSTED_DATE = "until-posted-date"
    FROM_ACCEPTED_DATE = "from-accepted-date"
    UNTIL_ACCEPTED_DATE = "until-accepted-date"
    HAS_LICENSE = "has-license"
    LICENSE_URL = "license.url"
    LICENSE_VERSION = "license.version"
    LICENSE_DELAY = "license.delay"
    HAS_FULL_TEXT = "has-full-text"
    FULL_TEXT_VERSION = "full-text.version"
    FULL_TEXT_TYPE = "full-text.type"
    FULL_TEXT_APPLICATION = "full-text.application"
    HAS_REFERENCES = "has-references"
    REFERENCE_VISIBILITY = "reference-visibility"
    HAS_ARCHIVE = "has-archive"
    ARCHIVE = "archive"
    HAS_ORCID = "has-orcid"
    HAS_AUTHENTICATED_ORCID = "has-authenticated-orcid"
    ORCID = "orcid"
    ISSN = "issn"
    ISBN = "isbn"
    TYPE = "type"
    DIRECTORY = "directory"
    DOI = "doi"
    UPDATES = "updates"
    IS_UPDATE = "is-update"
    HAS_UPDATE_POLICY = "has-update-policy"
    CONTAINER_TITLE = "container-title"
    CATEGORY_NAME = "category-name"
    TYPE_NAME = "type-name"
    AWARD_NUMBER = "award.number"
    AWARD_FUNDER = "award.funder"
    HAS_ASSERTION = "has-assertion"
    ASSERTION_GROUP = "assertion-group"
    ASSERTION = "assertion"
    HAS_AFFILIATION = "has-affiliation"
    ALTERNATIVE_ID = "alternative-id"
    ARTICLE_NUMBER = "article-number"
    HAS_ABSTRACT = "has-abstract"
    HAS_CLINICAL_TRIAL_NUMBER = "has-clinical-trial-number"
    CONTENT_DOMAIN = "content-domain"
    HAS_CONTENT_DOMAIN = "has-content-domain"
    HAS_DOMAIN_RESTRICTION = "has-domain-restriction"
    HAS_RELATION = "has-relation"
    RELATION_TYPE = "relation.type"
    RELATION_OBJECT = "relation.object"
    RELATION_OBJECT_TYPE = "relation.object-type"


class MembersFilterKey(Enum):
    HAS_PUBLIC_REFERENCES = "has-public-references"
    REFERENCE_VISIBILITY = "reference-visibility"
    BACKFILE_DOI_COUNT = "backfile-doi-count"
    CURRENT_DOI_COUNT = "current-doi-count"


class FundersFilterKey(Enum):
    LOCATION = "location"
