"""
Treat Gateway service package.

The gateway lets an AI assistant create ShardDog treat channels and mint
treats to NEAR wallets:
- Input normalization: receiverId/wallet defaulting and .near suffixing
- Forwarding: single-attempt calls to the ShardDog treat API
- Error translation: upstream failures mapped to {error, details}
- Discovery: the Bitte plugin manifest describing both tools

Structure:
- app.main: FastAPI app, routes and service wiring.
- app.adapters: HTTP client for the upstream treat API.
- app.domain: Request models, wallet helpers, mint/channel flows.
- app.registry: Channel credential stores.
- app.manifest: Plugin manifest builder and validator.
"""
