"""
Pydantic models for API requests and responses.
"""

from typing import Dict, Optional

from pydantic import BaseModel, Field


class ModelInfoModel(BaseModel):
    """API model for classifier information."""
    isTrained: bool = Field(..., description="Whether the classifier has been trained")
    k: int = Field(..., description="Number of neighbors consulted per prediction")
    trainingDataSize: int = Field(..., description="Number of training samples")
    voting: str = Field(..., description="Voting policy")
    useClassWeights: bool = Field(..., description="Whether class-imbalance weights are applied")


class EvaluationResponseModel(BaseModel):
    """API model for cross-validation results."""
    accuracy: float = Field(..., description="Fraction of correctly classified test samples")
    precision: float = Field(..., description="Macro-averaged precision")
    recall: float = Field(..., description="Macro-averaged recall")
    f1Score: float = Field(..., description="Harmonic mean of macro precision and recall")
    r2Score: float = Field(..., description="Squared correlation of label ordinals (proxy, not a true R2)")
    classCounts: Dict[str, int] = Field(default_factory=dict, description="Training samples per label")
    confusionMatrix: Optional[Dict[str, Dict[str, int]]] = Field(
        default=None,
        description="Counts per actual label and predicted label"
    )


class ErrorResponse(BaseModel):
    """API model for error responses."""
    error: str = Field(..., description="Error message")
    details: Optional[str] = Field(default=None, description="Error details")
    type: str = Field(default="error", description="Error type")
