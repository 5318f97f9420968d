"""Discovery components: address space, probes, pool and configuration"""
