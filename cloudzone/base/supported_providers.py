from typing import Literal


existing_cloud_providers = Literal["aws", "gcp"]
