# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

# If we're in the issuer directory, we need to add the root module so the
# imports will be the same as in the docker
import sys, os
sys.path.insert(0, os.getcwd())

import dotenv
import uvicorn

if __name__ == '__main__':
    # Environment variables already set take precedence over the .env file
    dotenv.load_dotenv()
    # HTTP
    uvicorn.run("issuer.issuer:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")), reload=False)
    # HTTPS
    # uvicorn.run("issuer.issuer:app", host="0.0.0.0", port=8000, ssl_keyfile="cert/private.pem", ssl_certfile="cert/public.pem")
