"""
Exception classes for the k-nearest-neighbor point classifier.
"""


class ClassifierError(Exception):
    """Base exception for classifier errors."""
    pass


class InvalidInputError(ClassifierError):
    """Raised when training data, query vectors or parameters are invalid."""
    pass


class DimensionMismatchError(InvalidInputError):
    """Raised when a feature vector's length differs from the training dimensionality."""
    pass


class NotTrainedError(ClassifierError):
    """Raised when prediction or evaluation is requested before training."""
    pass


class InsufficientDataError(ClassifierError):
    """Raised when there are fewer samples than cross-validation folds."""
    pass


class ConfigurationError(ClassifierError):
    """Raised when configuration is invalid."""
    pass


class ModelPersistenceError(ClassifierError):
    """Raised when saving or loading a trained model fails."""
    pass
