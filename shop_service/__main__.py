# shop_service/__main__.py
import os

import uvicorn
from dotenv import load_dotenv


def main():
    load_dotenv()
    uvicorn.run(
        "shop_service.main:app",
        host=os.getenv("SHOP_HOST", "0.0.0.0"),
        port=int(os.getenv("SHOP_PORT", "3002")),
    )


if __name__ == "__main__":
    main()
