"""AWS Lambda entry point: the app built from environment settings, behind Mangum."""
from mangum import Mangum

from download_server.main import create_app

app = create_app()

# API Gateway events carry no lifespan messages
handler = Mangum(app, lifespan="off")
