"""
AWS Lambda entrypoint for the Competitor Scan API (API Gateway / function URL).
The app keeps no state between invocations, so lifespan events are skipped.
"""
from mangum import Mangum
from api.main import app

handler = Mangum(app, lifespan="off")
