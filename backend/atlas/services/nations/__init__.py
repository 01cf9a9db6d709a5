from .catalog import CatalogLoadError, NationCatalog, DEFAULT_NATIONS_FILE

__all__ = ['CatalogLoadError', 'NationCatalog', 'DEFAULT_NATIONS_FILE']
