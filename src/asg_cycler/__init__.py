"""
asg-cycler: suspend and resume EC2 autoscaling groups on a schedule.

Stops or terminates the instances of a group outside business hours and
brings the group back afterwards, keeping its identity and configuration.
"""
__version__ = "0.1.0"
