from .ingestion_service import Created, Duplicate, IngestionService, IngestResult
from .query_service import ExpenseFilter, ExpenseList, QueryService
