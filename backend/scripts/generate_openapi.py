"""Print the OpenAPI schema of the ledger API as JSON."""

import json

from ledger.main import app

if __name__ == "__main__":
    print(json.dumps(app.openapi()))
