import uvicorn

from .utils.settings import PORT

if __name__ == "__main__":
    uvicorn.run("orderdesk.main:app", host="0.0.0.0", port=PORT)
