"""Test scenarios for the ``code-nextjs`` module.

Covers App Router/TypeScript/Tailwind setup, environment configuration,
CI/CD workflow generation, ops scripts, and static vs SSR rendering modes.
Paths are as they appear in the assembled project (module output lives
under ``frontend/``).
"""

from __future__ import annotations

from .models import ModuleTestSuite


def _config(module_id: str, version: str, rendering_mode: str) -> dict:
    return {
        "moduleId": module_id,
        "kind": "code",
        "type": "nextjs",
        "providers": ["nextjs"],
        "enabled": True,
        "fieldValues": {"nextjsVersion": version, "renderingMode": rendering_mode},
    }


STATIC_EXPORT_MARKER = "output: 'export'"
SSR_HEALTH_ROUTE = "frontend/src/app/ssr/v1/health/route.ts"

NEXTJS_SUITE = ModuleTestSuite.model_validate(
    {
        "moduleId": "code-nextjs",
        "moduleName": "Next.js Frontend",
        "scenarios": [
            {
                "name": "nextjs-15-static",
                "description": "Next.js 15 with static export - S3/CloudFront deployment",
                "config": _config("nextjs-static", "15", "static"),
                "expectedFiles": [
                    "frontend/package.json",
                    "frontend/tsconfig.json",
                    "frontend/next.config.ts",
                    "frontend/src/app/layout.tsx",
                    "frontend/src/app/page.tsx",
                    "frontend/.env.local",
                    "frontend/src/lib/utils.ts",
                    "frontend/src/utils/version.ts",
                ],
                "absentFiles": [SSR_HEALTH_ROUTE],
                "fileContentChecks": [
                    {
                        "file": "frontend/next.config.ts",
                        "contains": [STATIC_EXPORT_MARKER, "NextConfig"],
                    },
                    {
                        "file": "frontend/package.json",
                        "contains": ["next", "react", "typescript", "tailwindcss", "lucide-react"],
                    },
                    {
                        "file": "frontend/tsconfig.json",
                        "contains": ["compilerOptions", "strict", "@/*"],
                    },
                ],
            },
            {
                "name": "nextjs-15-ssr",
                "description": "Next.js 15 with SSR - EC2 deployment",
                "config": _config("nextjs-ssr", "15", "ssr"),
                "expectedFiles": [
                    "frontend/package.json",
                    "frontend/next.config.ts",
                    SSR_HEALTH_ROUTE,
                    "frontend/Dockerfile.dev",
                ],
                "fileContentChecks": [
                    {"file": "frontend/next.config.ts", "notContains": [STATIC_EXPORT_MARKER]},
                    {
                        "file": SSR_HEALTH_ROUTE,
                        "contains": ["GET", "Response", "health", "status"],
                    },
                ],
            },
            {
                "name": "nextjs-14-static",
                "description": "Next.js 14 with static export - legacy stable version",
                "config": _config("nextjs-14-static", "14", "static"),
                "expectedFiles": [
                    "frontend/package.json",
                    "frontend/next.config.ts",
                    "frontend/src/app/layout.tsx",
                ],
                "absentFiles": [SSR_HEALTH_ROUTE],
                "fileContentChecks": [
                    {"file": "frontend/package.json", "contains": ["next", "react"]},
                ],
            },
            {
                "name": "nextjs-environment-config",
                "description": "Next.js environment configuration - verify env file structure",
                "config": _config("nextjs-env", "15", "static"),
                "expectedFiles": ["frontend/.env.local"],
                "fileContentChecks": [
                    {
                        "file": "frontend/.env.local",
                        "contains": [
                            "NEXT_PUBLIC_APP_NAME",
                            "NEXT_PUBLIC_APP_HOST",
                            "NEXT_PUBLIC_API_BASE",
                        ],
                    },
                ],
            },
            {
                "name": "nextjs-cicd-workflow",
                "description": "Next.js CI/CD workflow - verify GitHub Actions configuration",
                "config": _config("nextjs-cicd", "15", "static"),
                "expectedFiles": [".github/workflows/Code-200-client.yml"],
                "fileContentChecks": [
                    {
                        "file": ".github/workflows/Code-200-client.yml",
                        "contains": ["name:", "on:", "jobs:", "npm", "node", "frontend"],
                    },
                ],
            },
            {
                "name": "nextjs-ops-scripts",
                "description": "Next.js ops scripts for EC2 deployment",
                "config": _config("nextjs-ops", "15", "ssr"),
                "expectedFiles": [
                    "ops/ec2-setup/init-nextjs.sh",
                    "ops/ec2-setup/nextjs.service",
                ],
                "fileContentChecks": [
                    {
                        "file": "ops/ec2-setup/init-nextjs.sh",
                        "contains": ["#!/bin/bash", "npm", "install"],
                    },
                    {
                        "file": "ops/ec2-setup/nextjs.service",
                        "contains": ["[Unit]", "[Service]", "npm", "start"],
                    },
                ],
            },
            {
                "name": "nextjs-tailwind-integration",
                "description": "Next.js Tailwind CSS integration - verify configuration",
                "config": _config("nextjs-tailwind", "15", "static"),
                "expectedFiles": ["frontend/package.json", "frontend/src/lib/utils.ts"],
                "fileContentChecks": [
                    {
                        "file": "frontend/package.json",
                        "contains": [
                            "tailwindcss",
                            "tailwind-merge",
                            "clsx",
                            "class-variance-authority",
                        ],
                    },
                    {
                        "file": "frontend/src/lib/utils.ts",
                        "contains": ["tailwind-merge", "clsx", "cn"],
                    },
                ],
            },
            {
                "name": "nextjs-local-dev-scripts",
                "description": "Next.js local development scripts",
                "config": _config("nextjs-local", "15", "static"),
                "expectedFiles": ["docker-compose.yaml", "kill-local.sh", "local.sh"],
                "fileContentChecks": [
                    {
                        "file": "docker-compose.yaml",
                        "contains": ["version:", "services:", "frontend"],
                    },
                    {"file": "local.sh", "contains": ["#!/bin/bash", "npm"]},
                ],
            },
        ],
    }
)
