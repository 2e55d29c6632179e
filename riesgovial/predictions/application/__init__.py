from .feeds import SyntheticPredictionFeed, ArcgisPredictionFeed, build_feed, PREDICTION_EVENT
