"""
AWS Lambda function handlers for the bucket list tracker.

Modules:
    api_handler: REST API over the activity and settings stores
"""
