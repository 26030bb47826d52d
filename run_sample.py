#!/usr/bin/env python
"""
Generate sample flyers and print the result and learning status as JSON.
Use: python run_sample.py [--style luxury-real-estate] [--kind open-house] [--count 5]
"""
import argparse
import json
import logging
from datetime import datetime

from flyerforge.config import get_config
from flyerforge.pipeline.orchestrator import create_orchestrator


SAMPLE_REQUEST = {
    "property_listing": {
        "address": "123 Luxury Lane, Beverly Hills, CA 90210",
        "property_type": "Luxury Estate",
        "bedrooms": 5,
        "bathrooms": 4.5,
        "sqft": "4,200",
        "price": "$2,500,000",
        "features": ["Pool", "Wine Cellar", "Smart Home", "Ocean View", "Home Theater", "Gym"],
        "open_house_date": "Saturday, June 14",
        "open_house_time": "1:00 PM - 4:00 PM",
    },
    "agent_profile": {
        "name": "Sarah Johnson",
        "agency": "Premier Real Estate",
        "phone": "(555) 123-4567",
        "email": "sarah@premierrealestate.com",
        "website": "www.premierrealestate.com",
    },
    "photos": [],
}


def main():
    parser = argparse.ArgumentParser(description="Generate sample flyer documents")
    parser.add_argument("--style", default="luxury-real-estate", help="Design system id ('' to auto-select)")
    parser.add_argument("--kind", default="listing", choices=["listing", "open-house"])
    parser.add_argument("--count", type=int, default=1, help="Number of generations to run")
    parser.add_argument("--date", help="Generation date (YYYY-MM-DD), defaults to today")
    args = parser.parse_args()

    config = get_config()
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    clock = None
    if args.date:
        fixed = datetime.strptime(args.date, "%Y-%m-%d")
        clock = lambda: fixed

    orchestrator = create_orchestrator(config, clock=clock)

    request = dict(SAMPLE_REQUEST, style=args.style, kind=args.kind)
    result = None
    for _ in range(max(args.count, 1)):
        result = orchestrator.generate_flyer_document(request)

    output = {
        "result": json.loads(result.model_dump_json()),
        "learning_status": json.loads(orchestrator.get_learning_status().model_dump_json()),
    }
    print(json.dumps(output, indent=2))


if __name__ == "__main__":
    main()
