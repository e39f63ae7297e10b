"""PostgreSQL dynamic full-text search.

Searches arbitrary SQLAlchemy models on a chosen set of text columns using
both PostgreSQL's linguistic text search and literal regex matching, and
provisions the trigger/backfill/index that keep a ``search_vector`` column
in sync.

Core Components:
- fold / register_folding: locale-aware folding for the literal branch
- compile_ts_query / compile_search: keyword -> prefix tsquery + normalized keyword
- resolve_column / resolve_table_name: ORM metadata -> validated identifiers
- compose / build_query: parameterized SQL with exactly two bound values
- ProvisioningSpec / SchemaProvisioner: trigger, backfill and GIN index
- DynamicSearchService: session-bound search and provisioning

Usage:
    from dynamic_search.core.database.search import DynamicSearchService

    service = DynamicSearchService(session)
    articles = await service.search(Article, "quick fox", Article.title, Article.body)

    # Inspect the SQL without executing it
    query = service.build_query(Article, "quick fox", Article.title)
    query.sql         # SELECT * FROM "articles" WHERE (to_tsvector(...) ...)
    query.parameters  # ("quick:* & fox:*", "quick fox")
"""

from dynamic_search.core.database.search.compiler import (
    CompiledSearch,
    compile_search,
    compile_ts_query,
)
from dynamic_search.core.database.search.composer import (
    ComposedQuery,
    SearchRequest,
    build_query,
    compose,
)
from dynamic_search.core.database.search.exceptions import (
    EmptyKeyword,
    ExecutionFailed,
    InvalidInput,
    InvalidKeyword,
    InvalidLanguage,
    InvalidSelector,
    NoAttributes,
    ProvisioningFailed,
    SearchError,
    UnresolvedMetadata,
    UnresolvedTable,
)
from dynamic_search.core.database.search.locale import (
    TURKISH_FOLDING,
    fold,
    folding_locales,
    is_folding_locale,
    register_folding,
    unregister_folding,
)
from dynamic_search.core.database.search.provisioning import (
    ProvisioningReport,
    ProvisioningSpec,
    ProvisioningStage,
    SchemaProvisioner,
    infrastructure_spec,
)
from dynamic_search.core.database.search.resolver import (
    ColumnIdentifier,
    resolve_column,
    resolve_columns,
    resolve_table_name,
)
from dynamic_search.core.database.search.service import DynamicSearchService
from dynamic_search.core.database.search.types import TSVECTOR

__all__ = [
    # Locale folding
    "TURKISH_FOLDING",
    # Types
    "TSVECTOR",
    # Resolver
    "ColumnIdentifier",
    # Compiler
    "CompiledSearch",
    # Composer
    "ComposedQuery",
    # Service
    "DynamicSearchService",
    # Errors
    "EmptyKeyword",
    "ExecutionFailed",
    "InvalidInput",
    "InvalidKeyword",
    "InvalidLanguage",
    "InvalidSelector",
    "NoAttributes",
    "ProvisioningFailed",
    # Provisioning
    "ProvisioningReport",
    "ProvisioningSpec",
    "ProvisioningStage",
    "SchemaProvisioner",
    "SearchError",
    "SearchRequest",
    "UnresolvedMetadata",
    "UnresolvedTable",
    "build_query",
    "compile_search",
    "compile_ts_query",
    "compose",
    "fold",
    "folding_locales",
    "infrastructure_spec",
    "is_folding_locale",
    "register_folding",
    "resolve_column",
    "resolve_columns",
    "resolve_table_name",
    "unregister_folding",
]
