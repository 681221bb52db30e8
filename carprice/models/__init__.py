"""
Model utilities package.

This package contains the helpers for training the price model, scoring
listings and evaluating the pipeline. Typical entrypoints are:

- carprice.models.train.Trainer(settings).train() : fit and save the artifact
- carprice.models.predict.Predictor.load(path).score(record) : score a listing
- carprice.models.evaluate.cross_validate(listings) : k-fold MAE / RMSE
"""
