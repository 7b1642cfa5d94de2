from typing import Literal


existing_providers = Literal["s3", "filesystem"]
