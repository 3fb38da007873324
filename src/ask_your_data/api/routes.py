from fastapi import FastAPI, UploadFile, File, HTTPException, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel
from typing import Optional

from src.ask_your_data.config import settings
from src.ask_your_data.utils.exceptions import AppException
from src.ask_your_data.utils.logger import get_logger

# Import core logic
from src.ask_your_data.core.ingestion import ingest_file, load_sample_dataset, build_overview
from src.ask_your_data.core.history import export_history_csv, export_rows_csv
from src.ask_your_data.core.session import AnalysisSession
from src.ask_your_data.core.visualization import generate_plotly_json, validate_chart_type
from src.ask_your_data.models import DatasetContext, QueryResult

logger = get_logger(__name__)

EXAMPLE_QUESTIONS = [
    "Show me the top 10 records by price",
    "What is the average sales by region?",
    "Count how many items are in each category",
    "Show the first 5 products",
    "Sum the total sales",
    "Group by category and count",
    "Show products with highest sales",
]


class QueryRequest(BaseModel):
    question: str
    chart_type: Optional[str] = None


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs"
)

# One analysis session per process; replaced wholesale by tests
app.state.session = AnalysisSession()


def _session(request: Request) -> AnalysisSession:
    return request.app.state.session


@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def _dataset_payload(context: DatasetContext, message: str) -> dict:
    return {
        "message": message,
        "filename": context.filename,
        "rows": len(context.rows),
        "columns": [{"name": c.name, "type": c.dtype} for c in context.columns],
    }


def _result_payload(question: str, result: QueryResult, chart_type: Optional[str] = None) -> dict:
    chart = None
    if result.error is None:
        chart = generate_plotly_json(result.result_rows, question, chart_type)
    return {
        "question": question,
        "query": result.query_synthesized,
        "rows": result.result_rows[:settings.RESULT_PREVIEW_ROWS],
        "row_count": result.row_count,
        "error": result.error,
        "chart": chart,
    }


def _csv_attachment(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "online", "message": f"{settings.APP_NAME} API is running"}


@app.get("/examples")
async def examples():
    return {"examples": EXAMPLE_QUESTIONS}


@app.post("/upload")
async def upload_file(request: Request, file: UploadFile = File(...)):
    """
    Uploads a CSV or JSON file, validates it, and makes it the active dataset.
    """
    try:
        logger.info(f"Received file upload: {file.filename}")
        content = await file.read()
        context = ingest_file(content, file.filename or "upload.csv")
        _session(request).load(context)
        return _dataset_payload(context, "File uploaded and processed successfully.")

    except AppException:
        raise
    except Exception as e:
        logger.error(f"Unexpected upload error: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/sample")
async def load_sample(request: Request):
    context = load_sample_dataset()
    _session(request).load(context)
    return _dataset_payload(context, "Sample dataset loaded.")


@app.get("/overview")
async def overview(request: Request):
    context = _session(request).require_context()
    return build_overview(context).model_dump()


@app.post("/query")
async def ask_query(request: Request, payload: QueryRequest):
    """
    Accepts a natural language question and returns rows, the synthesized query and a chart.
    Expected Payload: {"question": "What is the average sales?"}
    """
    validate_chart_type(payload.chart_type)
    result = _session(request).run_query(payload.question)
    return _result_payload(payload.question, result, payload.chart_type)


@app.get("/history")
async def history(request: Request):
    return {"entries": [e.model_dump(mode="json") for e in _session(request).history.entries]}


@app.delete("/history")
async def clear_history(request: Request):
    _session(request).clear_history()
    return {"message": "History cleared."}


@app.post("/history/{entry_id}/rerun")
async def rerun_query(request: Request, entry_id: str):
    session = _session(request)
    result = session.rerun(entry_id)
    return _result_payload(session.history.entries[-1].question, result)


@app.get("/history/export")
async def export_history(request: Request):
    return _csv_attachment(export_history_csv(_session(request).history), "query_history.csv")


@app.post("/export")
async def export_results(request: Request):
    """Returns every row of the latest result as CSV; nothing is re-run or recorded."""
    result = _session(request).require_last_result()
    if result.error is not None:
        raise HTTPException(status_code=400, detail=result.error)
    return _csv_attachment(export_rows_csv(result.result_rows), "query_results.csv")
