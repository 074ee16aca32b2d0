"""Static bundle scanner — comment stripping, rules, and the rule registry."""
