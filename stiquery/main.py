from stiquery.api.main import app

if __name__ == "__main__":
    import os
    import uvicorn
    host = os.getenv("STIQUERY_HOST", "0.0.0.0")
    port = int(os.getenv("STIQUERY_PORT", "8001"))
    uvicorn.run(app, host=host, port=port)
