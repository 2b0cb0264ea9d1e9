"""
Shared utilities for the ShardDog Treat Gateway.

This package aggregates common building blocks consumed by the gateway and
the local mock upstream:

- config: Service configuration via pydantic-settings
- logging: Structured logging with trace and request correlation
- metrics: Prometheus metrics helpers
- tracing: OpenTelemetry tracing config
- errors: Canonical error types and responses
- base_service: FastAPI app with middleware, health and error handlers

Service-specific logic belongs in service_treats; do not import from
service packages into shared/.
"""
