"""
carprice package initializer.

This package contains the project source code for loading used-car listings,
building the feature pipeline, training the price regressor and scoring
listings with a saved model.

Modules
-------
- config: Default paths and the `Settings` object.
- errors: Exception hierarchy shared by all modules.
- data: Listing schema and CSV loading.
- features: Categorical encoders and the preprocessing `ColumnTransformer`.
- models: Training, prediction and cross-validation.
"""

__version__ = "0.1.0"
