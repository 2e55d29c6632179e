from .normalizer import normalize_feature, normalize_features, normalize_risk
from .generator import SyntheticPredictionGenerator
from .arcgis_client import ArcgisClient
