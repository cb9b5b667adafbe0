import os

import uvicorn


if __name__ == "__main__":
    port = int(os.getenv("PORT", 3001))
    uvicorn.run("eduportal.main:app", host="0.0.0.0", port=port)
