import uvicorn

from taskapi.config import HOST, PORT


def main():
    # log_config=None keeps uvicorn from replacing our logging setup
    uvicorn.run("taskapi.main:create_app", factory=True, host=HOST, port=PORT, log_config=None)


if __name__ == "__main__":
    main()
