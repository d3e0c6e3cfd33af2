"""
FastAPI server exposing the point classifier.

Endpoints classify a coordinate, describe the loaded model and run
cross-validation on its training data.
"""

import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from ..config import AppConfig
from ..knn_classifier import KNNClassifier
from ..exceptions import (
    ClassifierError,
    ConfigurationError,
    InsufficientDataError,
    InvalidInputError,
    NotTrainedError
)
from .bootstrap import bootstrap_classifier
from .schemas import EvaluationResponseModel, ErrorResponse, ModelInfoModel


logger = logging.getLogger(__name__)


def configure_logging(level: int = logging.INFO) -> None:
    """Configure logging for the API process."""
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)


def handle_api_error(e: Exception) -> JSONResponse:
    """Handle API errors and return appropriate JSON response."""
    if isinstance(e, (InvalidInputError, ValueError)):
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(
                error=str(e),
                type="validation_error"
            ).model_dump()
        )
    elif isinstance(e, NotTrainedError):
        return JSONResponse(
            status_code=409,
            content=ErrorResponse(
                error=str(e),
                type="not_trained_error"
            ).model_dump()
        )
    elif isinstance(e, InsufficientDataError):
        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                error=str(e),
                type="insufficient_data_error"
            ).model_dump()
        )
    elif isinstance(e, ConfigurationError):
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error=str(e),
                type="configuration_error"
            ).model_dump()
        )
    elif isinstance(e, ClassifierError):
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error=str(e),
                type="classifier_error"
            ).model_dump()
        )
    else:
        logger.exception("Unhandled API error")
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="Internal server error",
                details=str(e),
                type="internal_error"
            ).model_dump()
        )


def get_classifier(request: Request) -> KNNClassifier:
    classifier = getattr(request.app.state, "classifier", None)
    if classifier is None:
        raise NotTrainedError("No classifier is loaded")
    return classifier


def create_app(
    classifier: Optional[KNNClassifier] = None,
    app_config: Optional[AppConfig] = None
) -> FastAPI:
    """
    Build the API application.

    Args:
        classifier: Optional ready classifier; when omitted one is bootstrapped on startup
        app_config: Optional configuration (defaults to the global config)

    Returns:
        FastAPI application
    """
    if app_config is None:
        from ..config import config as app_config

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.classifier is None:
            app.state.classifier = bootstrap_classifier(app_config)
        yield

    app = FastAPI(
        title="KNN Point Classifier API",
        description="Nearest-neighbor classification of coordinates",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.classifier = classifier
    app.state.config = app_config

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint."""
        current = getattr(request.app.state, "classifier", None)
        return {
            "status": "healthy",
            "timestamp": datetime.now().isoformat(),
            "classifier_loaded": current is not None,
            "classifier_trained": current is not None and current.is_trained()
        }

    @app.get("/classifier", response_class=PlainTextResponse)
    async def classify(
        request: Request,
        latitude: float = Query(..., description="Latitude of the point"),
        longitude: float = Query(..., description="Longitude of the point")
    ):
        """Predict the label of a coordinate."""
        try:
            logger.info(f"Classification request: latitude={latitude}, longitude={longitude}")
            return get_classifier(request).predict_point(latitude, longitude)
        except Exception as e:
            return handle_api_error(e)

    @app.get("/classifier/info", response_model=ModelInfoModel)
    async def get_model_info(request: Request):
        """Describe the loaded classifier."""
        try:
            return ModelInfoModel(**get_classifier(request).get_model_info())
        except Exception as e:
            return handle_api_error(e)

    @app.get("/evaluate", response_model=EvaluationResponseModel)
    def evaluate_model(
        request: Request,
        folds: int = Query(default=app_config.evaluation.default_folds, description="Number of folds"),
        maxTestSamplesPerFold: int = Query(
            default=app_config.evaluation.default_max_per_fold,
            description="Maximum number of test samples per fold"
        ),
        seed: Optional[int] = Query(default=app_config.evaluation.random_seed, description="Shuffle seed"),
        includeConfusionMatrix: bool = Query(default=True, description="Include the confusion matrix")
    ):
        """Cross-validate the loaded classifier on its training data."""
        # Plain def: FastAPI runs this CPU-bound handler in its threadpool
        try:
            outcome = get_classifier(request).evaluate(
                folds,
                maxTestSamplesPerFold,
                seed=seed,
                max_workers=app_config.evaluation.max_workers
            )
            return EvaluationResponseModel(**outcome.to_dict(include_confusion_matrix=includeConfusionMatrix))
        except Exception as e:
            return handle_api_error(e)

    return app


if __name__ == "__main__":
    import uvicorn
    from ..config import config

    configure_logging()
    print("Starting KNN Point Classifier API server...")
    print(f"Training workbook: {config.data_source.xlsx_file_path}")
    print(f"Model file: {config.model_store.model_path}")

    uvicorn.run(
        create_app(),
        host=config.api.host,
        port=config.api.port,
        log_level=config.api.log_level
    )
