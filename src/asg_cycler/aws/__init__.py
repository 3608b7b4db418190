"""AWS-facing adapters: client construction and the autoscaling provider."""
