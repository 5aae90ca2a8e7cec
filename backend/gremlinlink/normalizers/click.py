def normalize_click(click):
    return {
        "id": click.id,
        "block_id": click.block_id,
        "type": click.type,
        "timestamp": click.timestamp.isoformat() if click.timestamp else None,
        "referrer": click.referrer,
        "user_agent": click.user_agent,
        "ip_address": click.ip_address,
        "country": click.country,
    }


def normalize_block_analytics(summary):
    return {
        "total_clicks": summary["total_clicks"],
        "recent_clicks": [normalize_click(c) for c in summary["recent_clicks"]],
        "daily_stats": summary["daily_stats"],
        "by_type": summary["by_type"],
        "days": summary["days"],
    }
