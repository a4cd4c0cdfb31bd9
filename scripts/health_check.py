#!/usr/bin/env python3
"""健康检查脚本。

用于检查作品服务各组件的健康状态。
可作为运维脚本或监控探针使用。

使用方式：
    # 完整健康检查
    python scripts/health_check.py

    # 只检查特定组件
    python scripts/health_check.py --component cache
    python scripts/health_check.py --component config
    python scripts/health_check.py --component sources

    # JSON 输出
    python scripts/health_check.py --json

    # 退出码检查（用于 CI/CD）
    python scripts/health_check.py --strict
"""

import argparse
import asyncio
import json
import sys
from datetime import UTC, datetime
from pathlib import Path

# 添加项目根目录到 Python 路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


async def check_cache() -> dict:
    """检查缓存后端。"""
    try:
        from lifestack.core.infrastructure.cache import get_cache

        health = await get_cache().health_check()
        info = health.to_dict()
        info["status"] = "healthy" if health.status.value in ("ok", "skipped") else "unhealthy"
        return info

    except Exception as e:
        return {"status": "unhealthy", "error": str(e)}


async def check_config() -> dict:
    """检查作品源配置。"""
    try:
        from lifestack.core.config import settings
        from lifestack.modules.art.infrastructure.sources.factory import SOURCE_CLASSES

        weights = settings.art_source_weights
        active = {key: weight for key, weight in weights.items() if weight > 0}
        unknown = [key for key in weights if key not in SOURCE_CLASSES]

        status = "healthy"
        if unknown:
            status = "warning"
        if not any(key in SOURCE_CLASSES for key in active):
            status = "unhealthy"

        return {
            "status": status,
            "weights": weights,
            "unknown_sources": unknown,
            "pool_size": settings.ART_POOL_SIZE,
            "rotation_intervals": settings.ART_ROTATION_INTERVALS,
        }

    except Exception as e:
        return {"status": "unhealthy", "error": str(e)}


async def check_sources() -> dict:
    """对每个已启用的源各请求一次横向作品。"""
    try:
        from lifestack.modules.art.domain.entities import ArtFilters
        from lifestack.modules.art.domain.exceptions import ArtSourceError
        from lifestack.modules.art.infrastructure.dependencies import get_art_sources

        sources = await get_art_sources()

        async def probe(key: str) -> dict:
            try:
                artwork = await sources[key].fetch_artwork("landscape", ArtFilters())
            except ArtSourceError as e:
                return {"status": "error", "error": e.message}
            return {"status": "ok", "title": artwork.title}

        keys = list(sources)
        probes = await asyncio.gather(*(probe(key) for key in keys))
        results = dict(zip(keys, probes))

        failed = [key for key, probe in results.items() if probe["status"] != "ok"]
        status = "healthy"
        if failed:
            status = "warning" if len(failed) < len(results) else "unhealthy"

        return {"status": status, "sources": results, "failed_sources": failed}

    except Exception as e:
        return {"status": "unhealthy", "error": str(e)}


CHECKERS = {
    "cache": check_cache,
    "config": check_config,
    "sources": check_sources,
}


async def run_full_check() -> dict:
    """运行完整健康检查。"""
    results = {
        "timestamp": datetime.now(UTC).isoformat(),
        "overall_status": "healthy",
        "components": {},
    }

    # 并行执行所有检查
    names = list(CHECKERS)
    outcomes = await asyncio.gather(
        *(CHECKERS[name]() for name in names),
        return_exceptions=True,
    )
    for name, outcome in zip(names, outcomes):
        if isinstance(outcome, Exception):
            outcome = {"status": "error", "error": str(outcome)}
        results["components"][name] = outcome

    # 确定整体状态
    statuses = [c.get("status", "unknown") for c in results["components"].values()]

    if any(s in ("unhealthy", "error") for s in statuses):
        results["overall_status"] = "unhealthy"
    elif any(s == "warning" for s in statuses):
        results["overall_status"] = "degraded"

    return results


async def run_component_check(component: str) -> dict:
    """运行单个组件检查。"""
    if component not in CHECKERS:
        return {"error": f"Unknown component: {component}"}

    result = await CHECKERS[component]()
    return {
        "timestamp": datetime.now(UTC).isoformat(),
        "component": component,
        "result": result,
    }


def _emoji(status: str) -> str:
    if status == "healthy":
        return "✅"
    if status in ("warning", "degraded"):
        return "⚠️"
    return "❌"


def print_result(result: dict, json_output: bool = False):
    """打印检查结果。"""
    if json_output:
        print(json.dumps(result, indent=2, ensure_ascii=False))
        return

    print(f"\n{'=' * 60}")
    print(f"Health Check Report - {result.get('timestamp', 'N/A')}")
    print(f"{'=' * 60}")

    if "overall_status" in result:
        overall = result["overall_status"]
        print(f"\nOverall Status: {_emoji(overall)} {overall.upper()}")

        print(f"\n{'-' * 40}")
        for component, info in result.get("components", {}).items():
            comp_status = info.get("status", "unknown")
            print(f"{_emoji(comp_status)} {component}: {comp_status}")

            # 打印额外信息
            if comp_status != "healthy":
                for key, value in info.items():
                    if key != "status":
                        print(f"    {key}: {value}")

    elif "result" in result:
        info = result["result"]
        comp_status = info.get("status", "unknown")
        print(
            f"\n{result.get('component', 'Component')}: "
            f"{_emoji(comp_status)} {comp_status}"
        )

        for key, value in info.items():
            if key != "status":
                print(f"  {key}: {value}")

    print(f"\n{'=' * 60}\n")


def main():
    """主函数。"""
    parser = argparse.ArgumentParser(description="作品服务健康检查脚本")
    parser.add_argument(
        "--component",
        "-c",
        type=str,
        choices=list(CHECKERS),
        help="只检查特定组件",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="输出 JSON 格式",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="严格模式：任何非 healthy 状态都返回非零退出码",
    )

    args = parser.parse_args()

    if args.component:
        result = asyncio.run(run_component_check(args.component))
    else:
        result = asyncio.run(run_full_check())

    print_result(result, args.json)

    # 确定退出码
    if args.strict:
        overall = result.get(
            "overall_status", result.get("result", {}).get("status", "unknown")
        )
        if overall != "healthy":
            sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()
