import os
import boto3

from botocore.config import Config

main_boto_region = os.environ.get('MAIN_BOTO_REGION', 'eu-central-1')
aws_config_ddb = Config(retries={'max_attempts': 30}, region_name=os.environ.get('AWS_REGION', 'eu-central-1'))


def get_ses_client():
    # Simple Email Service Client.
    # SES is available only in a limited set of regions, so the region is configured separately.
    return boto3.client('ses', config=Config(retries={'max_attempts': 30},
                                             region_name=os.environ.get('SES_REGION', main_boto_region)))
